'''
    LSF - IBM Spectrum Load Sharing Facility batch scheduler (bsub)
'''

import logging

import tools
import util.misc

TOOL_NAME = 'bsub'

log = logging.getLogger(__name__)


class LsfTool(tools.Tool):

    def __init__(self, install_methods=None):
        if install_methods is None:
            install_methods = [tools.PrexistingUnixCommand(TOOL_NAME)]
        tools.Tool.__init__(self, install_methods=install_methods)

    def submit_command(self, job_args, stdout_file, stderr_file, memory_mb=None, job_name=None):
        ''' The bsub argument list that submits job_args (a command and its
            arguments) as a batch job. memory_mb sets both the memory
            reservation and the memory limit.
        '''
        cmd = [self.install_and_get_path(), '-o', stdout_file, '-e', stderr_file]
        if job_name:
            cmd.extend(['-J', job_name])
        if memory_mb:
            memory_mb = int(memory_mb)
            cmd.append('-R' + 'select[mem>{mem}] rusage[mem={mem}]'.format(mem=memory_mb))
            cmd.append('-M{}'.format(memory_mb))
        return cmd + list(job_args)

    # pylint: disable=W0221
    def execute(self, job_args, stdout_file, stderr_file, memory_mb=None, job_name=None):
        ''' Submit a job; raises CalledProcessError if bsub rejects it. '''
        cmd = self.submit_command(job_args, stdout_file, stderr_file, memory_mb=memory_mb, job_name=job_name)
        log.info("submitting to LSF: %s", ' '.join(job_args))
        return util.misc.run_and_print(cmd, check=True)
