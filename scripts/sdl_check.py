#!/usr/bin/env python
"""Standalone SDL validation script."""
import sys
import argparse
from stackdef.compiler.compiler import ManifestCompiler
from stackdef.sdl.errors import SDLError
from stackdef.sdl.parser import SDLParser
from stackdef.validation.validator import SDLValidator

def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Validate an SDL file and check that it compiles")
    parser.add_argument("--config", "-c", default="deploy.yaml", help="Path to the SDL file")
    parser.add_argument("--debug", action="store_true", help="Print verbose debug information")
    args = parser.parse_args()

    try:
        sdl = SDLParser.load(args.config)
        result = SDLValidator(debug=args.debug).validate(sdl)
        for warning in result.warnings:
            print(f"Warning: {warning}", file=sys.stderr)

        if not result.valid:
            for error in result.errors:
                print(f"Error: {error}", file=sys.stderr)
            return 1

        groups = ManifestCompiler(debug=args.debug).compile(sdl)
        print(f"{args.config}: valid, {len(groups)} manifest group(s)")
        return 0
    except (SDLError, FileNotFoundError) as e:
        print(f"Error checking SDL: {e}", file=sys.stderr)
        return 2

if __name__ == "__main__":
    sys.exit(main())
