import os
import sys

from Smallsh.config import SHELL_NAME


def builtin_error(message, params):
    print(f"{SHELL_NAME}: {message}", file=sys.stderr)
    params.set_last_status(1)
    return 1


def builtin_cd(args, params):
    """Change directory"""
    if len(args) > 1:
        return builtin_error("cd: too many arguments", params)

    if args:
        path = args[0]
    else:
        path = params.get("HOME", None)
        if not path:
            return builtin_error("cd: HOME not set", params)

    try:
        os.chdir(path)
    except OSError as e:
        return builtin_error(f"cd: {path}: {e.strerror}", params)
    return 0


def parse_exit_code(arg):
    """Integer like strtol(arg, 0): decimal, 0x.. hex, or octal with a leading 0."""
    text = arg.strip()
    digits = text.lstrip("+-")
    if len(digits) > 1 and digits[0] == "0" and digits[1] not in "xX":
        return int(text, 8)
    return int(text, 0)


def builtin_exit(args, params):
    """
    Exit the shell with the given code, or with $? when none is given.
    Raises SystemExit; bad arguments are reported and the shell goes on.
    """
    if len(args) > 1:
        return builtin_error("exit: too many arguments", params)

    if args:
        try:
            code = parse_exit_code(args[0])
        except ValueError:
            return builtin_error(f"exit: {args[0]}: integer argument required", params)
    else:
        try:
            code = int(params.last_status)
        except ValueError:
            code = 0

    raise SystemExit(code & 0xFF)


BUILTINS = {
    "cd": builtin_cd,
    "exit": builtin_exit,
}


def execute_builtin(command, params):
    """
    Execute built-in command if it matches.
    Redirections and '&' do not apply to built-ins.
    Returns (executed: bool, exit_code: int)
    """
    handler = BUILTINS.get(command.name)
    if handler is None:
        return False, 0
    return True, handler(command.argv[1:], params)
