from wordmaster.consts import VERSION

__version__ = VERSION
