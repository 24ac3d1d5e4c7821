# This file marks the api package for the HTTP boundary of the resource services.
# It exists so configuration, routers, schemas, and services share one import namespace.
