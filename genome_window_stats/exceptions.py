class GenomeWindowStatsError(Exception):
    """Base exception for the package"""
    pass

class InputError(GenomeWindowStatsError):
    """Raised when an input sequence file cannot be opened"""
    pass

class SequenceReadError(InputError):
    """Raised when a record cannot be read mid-stream"""
    pass

class ConfigError(GenomeWindowStatsError):
    """Raised when pipeline parameters are invalid"""
    pass

class MetricError(ConfigError):
    """Raised when a requested metric name is not recognized"""
    pass

class ReferenceProfileError(ConfigError):
    """Raised when no reference k-mer profile exists for a requested k"""
    pass

class KmerProfileError(GenomeWindowStatsError):
    """Raised when k-mer profiles are used in an invalid state or compared across k"""
    pass

class PipelineAborted(GenomeWindowStatsError):
    """Raised when the pipeline was cancelled before completion"""
    pass
