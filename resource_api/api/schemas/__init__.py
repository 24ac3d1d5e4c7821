# This file marks the schemas package for API request, record, and operational models.
