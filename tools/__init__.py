'''class Tool, class InstallMethod, and related subclasses and methods'''

import os
import logging

import util.misc

installed_tools = {}

log = logging.getLogger(__name__)


def get_tool_by_name(name):
    if name not in installed_tools:
        raise NotImplementedError
    return installed_tools[name]


class Tool(object):
    ''' Base class for an external program we run. A tool has a list of
        install methods; the first one that reports success provides the
        executable path.
    '''

    def __init__(self, install_methods=None):
        install_methods = install_methods or []

        self.install_methods = install_methods
        self.installed_method = None
        self.exec_path = None

    def is_installed(self):
        return (self.installed_method is not None)

    def install(self):
        if not self.is_installed():
            for m in self.install_methods:
                if not m.is_attempted():
                    m.attempt_install()
                if m.is_installed():
                    self.installed_method = m
                    self.exec_path = m.executable_path()
                    installed_tools[self.__class__.__name__] = self
                    break

    def executable_path(self):
        return self.exec_path

    def execute(self, *args):
        raise NotImplementedError

    def install_and_get_path(self):
        self.install()
        if self.executable_path() is None:
            raise NameError("unsuccessful in installing " + type(self).__name__)
        return self.executable_path()


class InstallMethod(object):
    ''' Base class for installation methods for a given tool.
        None of these methods should ever fail/error. attempt_install should
        return silently regardless of the outcome (is_installed must be
        called to verify success or failure).
    '''

    def __init__(self):
        self.attempts = 0

    def is_attempted(self):
        return self.attempts

    def attempt_install(self):  # Override _attempt_install, not this.
        self.attempts += 1
        self._attempt_install()

    def _attempt_install(self):
        raise NotImplementedError

    def is_installed(self):
        raise NotImplementedError

    def executable_path(self):
        raise NotImplementedError


class PrexistingUnixCommand(InstallMethod):
    ''' This is an install method that tries to find whether an executable
        binary already exists for free on the unix file system--it doesn't
        actually try to install anything. A bare command name (no "/") is
        looked up on the PATH.
    '''

    def __init__(self, path, require_executability=True):
        if path and os.path.sep not in path:
            path = util.misc.which(path)
        self.path = path
        self.installed = False
        self.require_executability = require_executability
        InstallMethod.__init__(self)

    def _attempt_install(self):
        self.installed = bool(self.path) and os.access(
            self.path, (os.X_OK | os.R_OK) if self.require_executability else os.R_OK)

    def is_installed(self):
        if not self.is_attempted():
            self.attempt_install()
        return self.installed

    def executable_path(self):
        return self.installed and self.path or None
