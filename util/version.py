''' This gets the git version into python-land
'''

__version__ = None

import subprocess, os, os.path


def get_project_path():
    '''Return the absolute path of the top-level project, assumed to be the
       parent of the directory containing this script.'''
    path = os.path.abspath(os.path.expanduser(__file__))
    return os.path.dirname(os.path.dirname(path))


def call_git_describe():
    cmd = ['git', 'describe', '--tags', '--always', '--dirty']
    try:
        out = subprocess.check_output(cmd, cwd=get_project_path(), stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.decode('utf-8').strip() or None


def release_file():
    return os.path.join(get_project_path(), 'VERSION')


def read_release_version():
    try:
        with open(release_file(), 'rt') as inf:
            return inf.readline().strip() or None
    except OSError:
        return None


def get_version():
    ''' Version string: git describe output when run from a checkout,
        otherwise the contents of the VERSION file, otherwise "unknown".
    '''
    global __version__
    if __version__ is None:
        __version__ = call_git_describe() or read_release_version() or 'unknown'
    return __version__
