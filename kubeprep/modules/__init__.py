"""
Host preparation modules.
"""
from .linux import LocalRunner, SSHRunner, YumInstaller

__all__ = [
    'LocalRunner',
    'SSHRunner',
    'YumInstaller',
]
