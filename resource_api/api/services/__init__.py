# This file marks the services package for modules that sit between routers and stores.
# Service modules validate payloads and translate store outcomes into API errors.
