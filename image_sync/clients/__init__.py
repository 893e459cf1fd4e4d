# Client packages
from .s3_manager import S3Manager, S3Object
from .script_runner import ScriptRunner

__all__ = ['S3Manager', 'S3Object', 'ScriptRunner']
