from chip8sak.errors import Chip8SAKValueError


class Chip8SAKBase:
    """
    Option handling shared by the chip8sak front-end classes.

    Subclasses list every option they understand, with its default, in
    ``options_with_defaults``.  Defaults are applied on ``__init__``, and any later
    ``set_options()`` call is checked against that list and passed through
    ``validate_option()``.
    """

    options_with_defaults = {}

    @classmethod
    def cts_type(cls):
        return 'Chip8SAKBase'

    def __init__(self):
        self._options = {}
        self.set_options(**self.options_with_defaults)

    def get_option(self, arg, default=None):
        """
        Get an option

        :param arg: option name
        :type arg: str
        :param default: default value
        :type default: type of option
        :return: value of option
        :rtype: option type
        """
        return self._options.get(arg.lower(), default)

    def get_options(self):
        """
        Get a copy of all current options

        :return: options
        :rtype: dict
        """
        return dict(self._options)

    def set_options(self, **kwargs):
        """
        Set options.  All option keywords are converted to lowercase.

        :param kwargs: options
        :type kwargs: keyword options
        :raises Chip8SAKValueError: unknown option, or a value the subclass rejects
        """
        for op, val in kwargs.items():
            op = op.lower()
            if op not in self.options_with_defaults:
                raise Chip8SAKValueError('Error: Unexpected option "%s"' % op)
            self._options[op] = self.validate_option(op, val)

    def validate_option(self, op, val):
        """
        Hook for subclasses: check (and possibly normalize) a single option value

        :return: the value to store
        """
        return val
