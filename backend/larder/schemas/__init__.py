"""
Larder Backend — Pydantic Request/Response Schemas
===================================================

What:  The JSON contract between clients and the backend.
How:   Request models declare every field optional so services can answer
       a missing field with the endpoint's own message instead of a
       generic validation error. Response models carry snake_case Python
       names and serialize with the camelCase keys clients expect
       (`userId`, `expiryDate`, ...).
"""
