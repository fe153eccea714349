"""Starter doot.yaml template written by ``doot init``."""

DEFAULT_YAML = """\
# doot configuration
version: v1

# file: copy files into place | link: symlink them back to this repository
mode: file

# A plan is a named set of groups; leave it empty to mean every group.
plans:
  all:
  # minimal: [bash]

# Each group is a folder next to this file. Map a resolver name (one per
# machine or OS) to where the group's files live on that machine.
groups:
  # bash:
  #   nux: "~"
  #   mac: "$HOME"
"""
