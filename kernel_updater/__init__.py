"""Custom kernel updater: compile, install and DKMS rebuild in one run.

Nothing here imports archinstall; the console entry point in __main__ must
get to sys.argv before archinstall does.
"""
