"""
HTTP transport for the credential service.
"""
