# Utility helpers
from .paths import (
    cleanup,
    file_base,
    file_extension,
    file_name,
    file_path,
    find_ancestor_dir,
    find_dir,
    find_file,
    format_path,
    glob_paths,
)
from .json_utils import add_json_ancestor_objects, get_json_value

__all__ = [
    'cleanup',
    'file_base',
    'file_extension',
    'file_name',
    'file_path',
    'find_ancestor_dir',
    'find_dir',
    'find_file',
    'format_path',
    'glob_paths',
    'add_json_ancestor_objects',
    'get_json_value'
]
