from . import api, install, package

__all__ = ['api', 'install', 'package']
