# This file marks the routers package for API route modules.
# Resource routes are generated per resource; greeting and health routes are declared by hand.
