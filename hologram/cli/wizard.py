"""Interactive wizard mode for Hologram."""

from typing import Optional


def run_wizard() -> Optional[str]:
    """Run interactive wizard to get the folder to scan from the user.

    Returns:
        Path entered by user, or None if cancelled.
    """
    print("\nNo folder was given, so you have been redirected to the Wizard setup")

    try:
        path = input("Enter path to the folder with your photos: ")
        return path.strip() if path and path.strip() else None
    except (KeyboardInterrupt, EOFError):
        print("\nCancelled.")
        return None
