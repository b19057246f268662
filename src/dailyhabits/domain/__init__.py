"""Domain layer: persistence contracts the services depend on."""
