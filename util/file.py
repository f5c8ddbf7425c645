'''This gives a number of useful quick methods for dealing with
tab-text files, gzipped files and standard streams.
'''

import contextlib
import os, os.path
import gzip
import tempfile
import shutil
import errno
import logging
import sys
import util.cmd

log = logging.getLogger(__name__)


def get_project_path():
    '''Return the absolute path of the top-level project, assumed to be the
       parent of the directory containing this script.'''
    path = __file__  # path to this script
    path = os.path.expanduser(path)  # interpret ~
    path = os.path.abspath(path)  # convert to absolute path
    path = os.path.dirname(path)  # containing directory: util
    path = os.path.dirname(path)  # containing directory: main project dir
    return path


def get_test_path():
    '''Return absolute path of "test" directory'''
    return os.path.join(get_project_path(), 'test')


def get_test_input_path(testClassInstance=None):
    '''Return the path to the directory containing input files for the specified
       test class
    '''
    if testClassInstance is not None:
        return os.path.join(get_test_path(), 'input', type(testClassInstance).__name__)
    else:
        return os.path.join(get_test_path(), 'input')


def mkstempfname(suffix='', prefix='tmp', directory=None, text=False):
    ''' There's no other one-liner way to securely ask for a temp file by
        filename only.  This calls mkstemp, which does what we want, except
        that it returns an open file handle, which causes huge problems on NFS
        if we don't close it.  So close it first then return the name part only.
    '''
    fd, fn = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=directory, text=text)
    os.close(fd)
    return fn


@contextlib.contextmanager
def tmp_dir(*args, **kwargs):
    """Create and return a temporary directory, which is cleaned up on context exit
    unless keep_tmp() is True."""
    name = tempfile.mkdtemp(*args, **kwargs)
    try:
        yield name
    finally:
        if keep_tmp():
            log.debug('keeping tempdir ' + name)
        else:
            shutil.rmtree(name)


def keep_tmp():
    """Whether to preserve temporary directories and files (useful during debugging).
    Return True if the environment variable NGS_WRANGLING_TMP_DIRKEEP is set.
    """
    return 'NGS_WRANGLING_TMP_DIRKEEP' in os.environ


def set_tmp_dir(name):
    proposed_prefix = ['tmp']
    if name:
        proposed_prefix.append(name)
    for e in ('LSB_JOBID', 'LSB_JOBINDEX', 'JOB_ID'):
        if e in os.environ:
            proposed_prefix.append(os.environ[e])
            break
    tempfile.tempdir = tempfile.mkdtemp(prefix='-'.join(proposed_prefix) + '-', dir=util.cmd.find_tmp_dir())
    os.environ['TMPDIR'] = tempfile.tempdir
    return tempfile.tempdir


def destroy_tmp_dir(tempdir=None):
    if not keep_tmp():
        if tempdir:
            shutil.rmtree(tempdir)
        elif tempfile.tempdir:
            shutil.rmtree(tempfile.tempdir)
    tempfile.tempdir = None


def mkdir_p(dirpath):
    ''' Verify that the directory given exists, and if not, create it.
    '''
    try:
        os.makedirs(dirpath)
    except OSError as exc:
        if exc.errno == errno.EEXIST and os.path.isdir(dirpath):
            pass
        else:
            raise


def open_or_gzopen(fname, *opts, **kwopts):
    return fname.endswith('.gz') and gzip.open(fname, *opts, **kwopts) or open(fname, *opts, **kwopts)


@contextlib.contextmanager
def open_or_stdin(fname):
    ''' Open a (possibly gzipped) text file for reading, or yield sys.stdin
        if fname is "-" or None. Real files are closed on context exit;
        stdin is left open.
    '''
    if fname in (None, '-'):
        yield sys.stdin
    else:
        with open_or_gzopen(fname, 'rt') as inf:
            yield inf


@contextlib.contextmanager
def open_or_stdout(fname, newline=None):
    ''' Open a text file for writing, or yield sys.stdout if fname is "-"
        or None. stdout is flushed but not closed on context exit.
    '''
    if fname in (None, '-'):
        try:
            yield sys.stdout
        finally:
            sys.stdout.flush()
    else:
        with open(fname, 'wt', newline=newline) as outf:
            yield outf


def slurp_file(fname, maxSizeMb=50):
    '''Read entire file into one string.  If file is gzipped, uncompress it on-the-fly.  If file is larger
    than `maxSizeMb` megabytes, throw an error; this is to encourage proper use of iterators for reading
    large files.  If `maxSizeMb` is None or 0, file size is unlimited.'''
    fileSize = os.path.getsize(fname)
    if maxSizeMb and fileSize > maxSizeMb * 1024 * 1024:
        raise RuntimeError('Tried to slurp large file {} (size={}); are you sure?  Increase `maxSizeMb` param if yes'.
                           format(fname, fileSize))
    with open_or_gzopen(fname, 'rt') as f:
        return f.read()
