from importlib.metadata import PackageNotFoundError, version

try:
    _version = version("facetcheck")
except PackageNotFoundError as e:
    raise PackageNotFoundError(
        "facetcheck is not installed; please install it in your Python environment "
        "(e.g. 'pip install -e .' from the source tree)."
    ) from e
