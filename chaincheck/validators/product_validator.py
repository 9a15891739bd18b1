#validators/product_validator.py
"""
Request Validation
Shape checks on request bodies before they reach the registry
"""

from typing import Any, Dict, Optional


class ProductValidator:
    """Validator for registry request payloads"""
    
    @staticmethod
    def validate_registration_payload(data: Dict[str, Any]) -> Optional[str]:
        """
        Validate a batch registration body
        
        Args:
            data: Parsed JSON body
            
        Returns:
            Error message if validation fails, None if valid
        """
        if not isinstance(data, dict):
            return "Request body must be a JSON object"
        
        required_fields = ['batch_id', 'name', 'brand', 'serial_hashes']
        for field in required_fields:
            if field not in data:
                return f"{field} is required"
        
        if not isinstance(data['serial_hashes'], list):
            return "serial_hashes must be an array"
        
        if not isinstance(data['name'], str) or not isinstance(data['brand'], str):
            return "name and brand must be strings"
        
        return None
    
    @staticmethod
    def validate_batch_registration_payload(data: Dict[str, Any]) -> Optional[str]:
        if not isinstance(data, dict) or 'batches' not in data:
            return "batches array required"
        
        if not isinstance(data['batches'], list) or len(data['batches']) == 0:
            return "batches must be a non-empty array"
        
        for index, entry in enumerate(data['batches']):
            error = ProductValidator.validate_registration_payload(entry)
            if error:
                return f"batches[{index}]: {error}"
        
        return None
    
    @staticmethod
    def validate_verification_payload(data: Dict[str, Any]) -> Optional[str]:
        if not isinstance(data, dict):
            return "Request body must be a JSON object"
        
        if 'serial_hash' not in data:
            return "serial_hash is required"
        
        if 'batch_id' not in data:
            return "batch_id is required"
        
        return None
    
    @staticmethod
    def validate_authorization_payload(data: Dict[str, Any]) -> Optional[str]:
        if not isinstance(data, dict):
            return "Request body must be a JSON object"
        
        if not data.get('address'):
            return "address is required"
        
        if 'authorized' in data and not isinstance(data['authorized'], bool):
            return "authorized must be a boolean value"
        
        return None
