"""Process execution layer: descriptors, results and runners."""

from simstation.platform.process_adapter import CommandDescriptor, IProcessRunner, ProcessResult
from simstation.platform.subprocess_impl import AsyncProcessRunner

__all__ = ['AsyncProcessRunner', 'CommandDescriptor', 'IProcessRunner', 'ProcessResult']
