from .capabilities import HostCapabilities, HeadlessHost

__all__ = ['HostCapabilities', 'HeadlessHost']
