"""Pawprint — static HTML pages from template fragments and page scripts.

Fragments are kida templates under ``components/``.  Page scripts under
``pages/`` export a function returning the page data, including the name
of the fragment to render::

    # components/card.html
    <div>{{ title }}</div>

    # pages/home.py
    def default():
        return {"component": "card", "title": "Hi"}

Quick start::

    import pawprint

    pawprint.build("my-site/")     # writes dist/home.html
    pawprint.watch("my-site/")     # rebuilds on every change

"""

__version__ = "0.1.0-dev"
__all__ = [
    "PawprintConfig",
    "StaticPagesPlugin",
    "__version__",
    "build",
    "watch",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import pawprint`` fast; kida and watchfiles load on first use.
    """
    if name == "PawprintConfig":
        from pawprint.config import PawprintConfig

        return PawprintConfig

    if name == "StaticPagesPlugin":
        from pawprint.plugin import StaticPagesPlugin

        return StaticPagesPlugin

    if name == "build":
        from pawprint.app import build

        return build

    if name == "watch":
        from pawprint.app import watch

        return watch

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
