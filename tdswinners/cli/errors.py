class CLIError(Exception):
    pass


class ConfigError(CLIError):
    pass
