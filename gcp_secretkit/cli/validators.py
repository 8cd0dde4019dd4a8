"""Input validation for CLI arguments."""
import re
import sys

# Secret Manager ids: letters, digits, underscores and hyphens, up to 255 chars
SECRET_NAME_PATTERN = re.compile(r'^[a-zA-Z0-9_-]{1,255}$')
VERSION_PATTERN = re.compile(r'[0-9]+')


def validate_secret_name(name: str) -> None:
    """
    Validate secret name matches GCP requirements.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not name:
        print("Error: Secret name cannot be empty", file=sys.stderr)
        print("\nSecret names must match: [a-zA-Z0-9_-]", file=sys.stderr)
        sys.exit(2)

    if not SECRET_NAME_PATTERN.match(name):
        print(f"Error: Invalid secret name '{name}'", file=sys.stderr)
        print("\nAllowed characters: letters, numbers, underscores (_), hyphens (-)", file=sys.stderr)
        print("Maximum length: 255 characters", file=sys.stderr)
        print("\nExamples of valid names:", file=sys.stderr)
        print("  MY_SECRET", file=sys.stderr)
        print("  api-key-prod", file=sys.stderr)
        print("\nExamples of invalid names:", file=sys.stderr)
        print("  api.key (contains dot)", file=sys.stderr)
        print("  MY SECRET (contains space)", file=sys.stderr)
        sys.exit(2)


def validate_secret_value(value: str) -> None:
    """
    Validate secret value is not empty.

    GCP Secret Manager does not allow empty secret payloads.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not value or value.strip() == "":
        print("Error: Secret value cannot be empty", file=sys.stderr)
        print("\nGCP Secret Manager does not allow empty secret payloads.", file=sys.stderr)
        sys.exit(2)


def validate_version(version: str) -> int:
    """
    Parse a version argument into a positive integer.

    Returns:
        The version number

    Raises:
        SystemExit with code 2 if the value is not a positive integer
    """
    if not VERSION_PATTERN.fullmatch(version) or int(version) < 1:
        print(f"Error: Invalid version '{version}'", file=sys.stderr)
        print("\nVersions are positive integers; omit --version to read the latest.", file=sys.stderr)
        sys.exit(2)
    return int(version)
