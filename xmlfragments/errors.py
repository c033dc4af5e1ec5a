class XmlFragmentError(Exception):
    """Base class for failures raised by xmlfragments."""


class ConfigurationFailure(XmlFragmentError):
    """The tree model or emission engine could not be set up."""


class EmissionFailure(XmlFragmentError):
    """Rendering a tree to text failed partway."""


class QueryFailure(XmlFragmentError):
    """An XPath expression is invalid or could not be evaluated."""

    def __init__(self, expression: str, reason: str = ''):
        self.expression = expression
        message = f'Failed to get node: [{expression}]'
        if reason:
            message += f': {reason}'
        super().__init__(message)
