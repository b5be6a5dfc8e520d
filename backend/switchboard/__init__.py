# switchboard package
