"""Domain rules: partitions, roles and the access policy."""
