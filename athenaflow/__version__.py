__version__ = '0.1.0'
__author__ = 'athenaflow contributors'
__email__ = 'athenaflow@users.noreply.github.com'
__description__ = 'Convenience client for AWS Athena: submit, poll, paginate and flatten query results'
__url__ = 'https://github.com/athenaflow/athenaflow'
__license__ = 'MIT'
