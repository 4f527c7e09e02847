"""
OpenStaty mobile shell.

Receives files/text shared from other apps on Android and hands the cached
local path to the UI over the `tech.sallytion.openstaty/share` channel.
"""
