"""IMC Bot core: errors and observability."""
