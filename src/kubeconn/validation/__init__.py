"""Field rules declared on the models and the helpers to read them."""
