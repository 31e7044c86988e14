"""Find open-source repositories with weak documentation and queue work orders for them."""

__version__ = "0.1.0"

__all__: list[str] = ["__version__"]
