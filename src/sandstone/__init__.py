from sandstone.consts import VERSION

__version__ = VERSION
