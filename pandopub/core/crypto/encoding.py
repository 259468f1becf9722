"""Encoding utilities."""
import base64
import binascii


class Base64Encoder:
    """Standard Base64 encoder/decoder, as used for secrets and signatures."""
    
    @staticmethod
    def encode(data: bytes) -> str:
        """Encodes bytes to padded standard Base64."""
        return base64.b64encode(data).decode('ascii')

    @staticmethod
    def decode(data: str) -> bytes:
        """
        Decodes standard Base64 (with or without padding).
        
        Raises:
            ValueError: If the input is not valid Base64
        """
        data = data.strip()
        padding = len(data) % 4
        if padding:
            data += '=' * (4 - padding)
        try:
            return base64.b64decode(data, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 data: {e}") from e
