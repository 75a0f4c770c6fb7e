"""Hash utilities for Smk."""

import hashlib


def object_header(obj_type: str, size: int) -> bytes:
    """
    Build the header that prefixes every stored object.
    
    Format: <type>\\n<byte length>\\n
    
    Args:
        obj_type: Object type (blob, tree, commit)
        size: Length of the raw content in bytes
        
    Returns:
        bytes: Encoded header
    """
    return f"{obj_type}\n{size}\n".encode()


def hash_object(data: bytes) -> str:
    """
    Compute SHA-1 hash of data.
    
    Args:
        data: Bytes to hash
        
    Returns:
        40-character hex string
    """
    return hashlib.sha1(data).hexdigest()


def hash_content(obj_type: str, content: bytes) -> str:
    """
    Compute the identity of an object without storing it.
    
    Args:
        obj_type: Object type (blob, tree, commit)
        content: Raw object content
        
    Returns:
        40-character hex string
    """
    return hash_object(object_header(obj_type, len(content)) + content)
