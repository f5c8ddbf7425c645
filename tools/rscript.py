'''
    Rscript - command-line front end of the R statistical environment
    https://www.r-project.org/
'''

import logging

import tools
import util.misc

TOOL_NAME = 'Rscript'

log = logging.getLogger(__name__)


class RscriptTool(tools.Tool):

    def __init__(self, install_methods=None):
        if install_methods is None:
            install_methods = [tools.PrexistingUnixCommand(TOOL_NAME)]
        tools.Tool.__init__(self, install_methods=install_methods)

    def command(self, script, args=()):
        ''' The argument list that runs an R script. '''
        return [self.install_and_get_path(), script] + list(args)

    # pylint: disable=W0221
    def execute(self, script, args=(), check=True):
        log.info("running R script %s", script)
        return util.misc.run_and_print(self.command(script, args), check=check)
