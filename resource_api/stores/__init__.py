# This file marks the stores package for resource persistence backends.
# It exists so the in-memory and relational stores share one import namespace with their contract.
# Both backends implement the protocol in `base` and are selected per resource at startup.
# Keeping backends together makes it easy to compare how each honors the same CRUD rules.
