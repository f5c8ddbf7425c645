'''A few miscellaneous tools. '''
import logging
import os
import subprocess
import sys

log = logging.getLogger(__name__)


def histogram(items):
    ''' I count the number of times I see stuff and return a dict of counts. '''
    out = {}
    for i in items:
        out.setdefault(i, 0)
        out[i] += 1
    return out


def run_and_print(args, stdin=None, env=None, cwd=None,
                  timeout=None, silent=False, check=False,
                  loglevel=None):
    '''Run a command, capturing stdout+stderr together, and echo the output
    to our stderr (or to the log at `loglevel`). Data streams of the calling
    script are on stdout, so nothing is ever echoed there.

    Returns the subprocess.CompletedProcess; raises CalledProcessError if
    `check` is set and the command fails.
    '''
    log.debug(' '.join(args))
    result = subprocess.run(args, stdin=stdin, stdout=subprocess.PIPE,
                            stderr=subprocess.STDOUT, env=env, cwd=cwd,
                            timeout=timeout)
    output = result.stdout.decode('utf-8')
    if loglevel:
        log.log(loglevel, output)
    elif not silent:
        sys.stderr.write(output)
        sys.stderr.flush()
    if check and result.returncode != 0:
        raise subprocess.CalledProcessError(result.returncode, args, result.stdout)
    return result


def which(application_binary_name):
    """
        Similar to the *nix "which" command,
        this function finds the first executable binary present
        in the system PATH for the binary specified.
        It differs in that it resolves symlinks.
    """
    path = os.getenv('PATH', '')
    for path in path.split(os.path.pathsep):
        full_path = os.path.join(path, application_binary_name)
        if os.path.exists(full_path) and os.access(full_path, os.X_OK):
            link_resolved_path = os.path.realpath(full_path)
            return link_resolved_path
    return None
