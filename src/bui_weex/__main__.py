"""Allow ``python -m bui_weex`` invocation."""

from bui_weex.cli import app

if __name__ == "__main__":
    app(prog_name="bui-weex")
