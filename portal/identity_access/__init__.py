"""Identity & access: credentials, role lookup, access policy and auth context."""
