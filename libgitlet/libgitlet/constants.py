"""Constants shared across libgitlet."""

import string

DEFAULT_REPO_DIR = '.gitlet'
DEFAULT_BRANCH = 'master'

OBJECTS_SUBDIR = 'objects'
COMMITS_SUBDIR = 'commits'
BLOBS_SUBDIR = 'blobs'
REFS_DIR = 'refs'
HEADS_DIR = 'heads'
HEAD_FILE = 'HEAD'
INDEX_FILE = 'index'
REMOTES_FILE = 'remotes'
CONFIG_FILE = 'config'

HASH_LENGTH = 40
HASH_CHARSET = frozenset(string.hexdigits.lower())

INITIAL_COMMIT_MESSAGE = 'initial commit'
TIMESTAMP_FORMAT = '%a %b {day} %H:%M:%S %Y %z'

CONFLICT_START = '<<<<<<< HEAD\n'
CONFLICT_SEPARATOR = '=======\n'
CONFLICT_END = '>>>>>>>\n'
