"""Order services: code generation, lifecycle rules and coordination."""
