"""A module that centralizes the version information for shuntyard.

Changing the version here not only affects the version printed with the ``--version`` command line option, but it also
automatically updates the version used in the build system.
"""

__version__ = "0.1.0"
VERSION_STRING = __version__


if __name__ == '__main__':
    print(VERSION_STRING)
