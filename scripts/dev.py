#!/usr/bin/env python3
"""
Development script for FitCoach
Run with: python scripts/dev.py [command]
"""

import argparse
import subprocess
import sys
from pathlib import Path

from rich.console import Console

ROOT = Path(__file__).parent.parent
console = Console()


def run_command(cmd: list[str], description: str = "") -> bool:
    """Run a command and report failures"""
    if description:
        console.print(f"🚀 [bold cyan]{description}[/bold cyan]")

    try:
        subprocess.run(cmd, check=True, cwd=ROOT)
        return True
    except subprocess.CalledProcessError as e:
        console.print(f"❌ [bold red]Command failed:[/bold red] {' '.join(cmd)}")
        console.print(f"Error: {e}")
        return False


def serve():
    """Start the development server"""
    console.print("🏋️ Starting FitCoach development server...")
    run_command(
        ["uvicorn", "fitcoach.main:app", "--reload", "--host", "0.0.0.0", "--port", "8000"],
        "Starting FastAPI server with hot reload",
    )


def test():
    """Run tests"""
    run_command(["pytest", "-v"], "Running tests")


def format_code():
    """Format code with black and isort"""
    run_command(["black", "fitcoach", "tests", "scripts"], "Formatting code with black")
    run_command(["isort", "fitcoach", "tests", "scripts"], "Organizing imports with isort")


def lint():
    """Run linting checks"""
    run_command(["flake8", "fitcoach", "tests"], "Running flake8 linting")
    run_command(["mypy", "fitcoach"], "Running mypy type checking")


def check():
    """Run all checks (format, lint, test)"""
    console.print("🔍 Running all checks...")
    success = True
    success &= run_command(["black", "--check", "fitcoach", "tests"], "Checking code formatting")
    success &= run_command(
        ["isort", "--check-only", "fitcoach", "tests"], "Checking import organization"
    )
    success &= run_command(["flake8", "fitcoach", "tests"], "Running linting")
    success &= run_command(["mypy", "fitcoach"], "Running type checking")
    success &= run_command(["pytest", "-v"], "Running tests")

    if success:
        console.print("✅ [bold green]All checks passed![/bold green]")
    else:
        console.print("❌ [bold red]Some checks failed![/bold red]")
        sys.exit(1)


def setup():
    """Create .env from the example file"""
    console.print("🛠️ Setting up FitCoach development environment...")

    env_file = ROOT / ".env"
    env_example = ROOT / ".env.example"

    if not env_file.exists() and env_example.exists():
        env_file.write_text(env_example.read_text())
        console.print("📝 Created .env file from .env.example")
        console.print("⚠️  [yellow]Update .env with your Supabase and OpenAI keys[/yellow]")

    console.print("✅ Development environment setup complete!")
    console.print("\n📋 Next steps:")
    console.print("1. Update .env with your API keys")
    console.print("2. Run: python scripts/dev.py db-migrate")
    console.print("3. Run: python scripts/dev.py serve")


def db_migrate():
    """Point at the schema file; Supabase migrations are applied by hand"""
    console.print("🗄️ Running database migrations...")
    console.print("Please run the SQL schema manually in your Supabase dashboard:")
    console.print("📄 File: database/schema.sql")


def main():
    parser = argparse.ArgumentParser(description="FitCoach development tools")
    parser.add_argument(
        "command",
        choices=["serve", "test", "format", "lint", "check", "setup", "db-migrate"],
        help="Command to run",
    )

    args = parser.parse_args()

    commands = {
        "serve": serve,
        "test": test,
        "format": format_code,
        "lint": lint,
        "check": check,
        "setup": setup,
        "db-migrate": db_migrate,
    }

    commands[args.command]()


if __name__ == "__main__":
    main()
