"""
Credentials app: per-service credential pools and their allocation to users.

- pool.CredentialPool: file-backed FIFO pools with an atomic pop
- parsing.parse_credential_line: popped line -> CredentialRecord
- services.CredentialAllocator: generate / history / stats
- services.ServiceCatalog: configured services with remaining stock
"""
