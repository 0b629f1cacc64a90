"""
scriptbundle: flatten remote scripts into self-contained files.

Fetches an entry script by its (group, script) address, replaces each
project import with the code it refers to, and packs the results into a
zip archive:

    - helper imports pull only the requested functions and constants
      out of the shared helper module
    - same-family imports inline the script's sibling file
    - adjacent imports inline a file of another group/script pair

Source files are handled as text lines. Nothing is parsed or executed.
"""

__version__ = "0.1.0"
