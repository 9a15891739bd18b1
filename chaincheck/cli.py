# cli.py
"""
Operator commands, run as the configured owner

    flask --app wsgi chaincheck stats
    flask --app wsgi chaincheck register batches.json
"""
import json
import os
from datetime import datetime, timezone

import click
from flask.cli import AppGroup

from chaincheck.core.exceptions import ChainCheckError, InvalidInput
from chaincheck.extensions import get_registry
from chaincheck.utils.crypto_utils import generate_serial_hash
from chaincheck.utils.input_validators import validate_batch_id

chaincheck_cli = AppGroup('chaincheck', help='ChainCheck registry administration.')


def _owner():
    return get_registry().owner()


@chaincheck_cli.command('authorize')
@click.argument('address')
@click.option('--revoke', is_flag=True, help='Revoke instead of grant.')
def authorize_command(address, revoke):
    """Authorize (or revoke) a manufacturer address."""
    registry = get_registry()
    try:
        registry.set_manufacturer_authorization(_owner(), address, not revoke)
    except ChainCheckError as e:
        raise click.ClickException(e.message)

    status = 'YES' if registry.is_authorized(address) else 'NO'
    click.echo(f"Manufacturer {address} authorized: {status}")


@chaincheck_cli.command('register')
@click.argument('batch_file', type=click.File('r'))
def register_command(batch_file):
    """Register batches from a JSON file.

    The file holds a list of {batch_id, name, brand, serials}; plaintext
    serials are hashed locally and only their commitments are registered.
    """
    try:
        entries = json.load(batch_file)
    except ValueError as e:
        raise click.ClickException(f"Invalid JSON: {e}")

    if not isinstance(entries, list):
        raise click.ClickException("Batch file must contain a JSON array")

    batches = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise click.ClickException("Each batch must be a JSON object")
        batches.append(_to_registration(entry))

    registry = get_registry()
    try:
        results = registry.register_products(_owner(), batches)
    except ChainCheckError as e:
        raise click.ClickException(e.message)

    for result in results:
        if result['success']:
            click.echo(f"Batch {result['batch_id']}: registered")
        else:
            click.echo(f"Batch {result['batch_id']}: FAILED ({result['error']})")

    _echo_statistics(registry.get_statistics())


@chaincheck_cli.command('stats')
def stats_command():
    """Show counters and authorized manufacturers."""
    registry = get_registry()
    click.echo(f"Owner: {registry.owner()}")
    click.echo(f"Paused: {'yes' if registry.paused() else 'no'}")
    _echo_statistics(registry.get_statistics())

    click.echo("Authorized Manufacturers:")
    manufacturers = registry.get_manufacturers()
    if not manufacturers:
        click.echo("  (none)")
    for index, address in enumerate(manufacturers, start=1):
        click.echo(f"  {index}. {address}")


@chaincheck_cli.command('events')
@click.option('--event', 'event_name', default=None, help='ProductRegistered, Verified, ManufacturerAuthorized, ...')
@click.option('--from', 'from_sequence', default=1, type=int)
@click.option('--to', 'to_sequence', default=None, type=int)
def events_command(event_name, from_sequence, to_sequence):
    """List recorded events."""
    registry = get_registry()
    try:
        events = registry.query_events(event_name, from_sequence, to_sequence)
    except ChainCheckError as e:
        raise click.ClickException(e.message)

    if not events:
        click.echo("(none found)")
    for event in events:
        args = ', '.join(f"{key}={value}" for key, value in event.args.items())
        click.echo(f"#{event.sequence} {event.name.value}({args})")

    summary = registry.events.summarize_verifications(events)
    click.echo(f"Summary: {summary['authentic']} authentic, {summary['potential_counterfeits']} potential counterfeits")


@chaincheck_cli.command('pause')
def pause_command():
    """Suspend registration and verification."""
    try:
        get_registry().pause(_owner())
    except ChainCheckError as e:
        raise click.ClickException(e.message)
    click.echo("Registry is now PAUSED")


@chaincheck_cli.command('unpause')
def unpause_command():
    """Resume registration and verification."""
    try:
        get_registry().unpause(_owner())
    except ChainCheckError as e:
        raise click.ClickException(e.message)
    click.echo("Registry is now ACTIVE")


@chaincheck_cli.command('export')
@click.option('--output', type=click.Path(dir_okay=False), default=None,
              help='Defaults to backups/backup-<timestamp>.json')
def export_command(output):
    """Write a JSON backup of the registry."""
    snapshot = get_registry().export_snapshot()

    if output is None:
        timestamp = datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')
        os.makedirs('backups', exist_ok=True)
        output = os.path.join('backups', f"backup-{timestamp}.json")

    with open(output, 'w') as f:
        json.dump(snapshot, f, indent=2)

    data = snapshot['data']
    click.echo(f"Backup saved to: {output}")
    click.echo(f"  - Manufacturers: {len(data['authorized_manufacturers'])}")
    click.echo(f"  - Product Batches: {len(data['product_batches'])}")
    click.echo(f"  - Verifications: {len(data['verified_serials'])}")


def _echo_statistics(stats):
    click.echo(f"Total Products: {stats['total_products']}")
    click.echo(f"Total Verifications: {stats['total_verifications']}")
    click.echo(f"Total Manufacturers: {stats['total_manufacturers']}")


def _to_registration(entry):
    """Hash plaintext serials; entries may also carry precomputed serial_hashes"""
    batch_id = entry.get('batch_id')
    serial_hashes = list(entry.get('serial_hashes') or [])

    if entry.get('serials'):
        try:
            batch_id = validate_batch_id(batch_id)
        except InvalidInput as e:
            raise click.ClickException(f"Batch {entry.get('batch_id')}: {e.message}")
        serial_hashes.extend(generate_serial_hash(batch_id, str(serial)) for serial in entry['serials'])

    return {
        'batch_id': batch_id,
        'name': entry.get('name'),
        'brand': entry.get('brand'),
        'serial_hashes': serial_hashes,
    }
