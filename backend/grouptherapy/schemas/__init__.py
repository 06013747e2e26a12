"""
Pydantic records exchanged between the storage layer and the API.
"""
