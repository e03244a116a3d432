"""Entry point for `python -m openwrt_builder`."""

from openwrt_builder.cli import app

if __name__ == "__main__":
    app(prog_name="owrt-build")
