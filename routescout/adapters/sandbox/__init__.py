from routescout.adapters.sandbox.runner import SandboxRunner, parse_launch_output

__all__ = ["SandboxRunner", "parse_launch_output"]
