"""English strings. Base table for every language."""

STRINGS = {
    "title": "• μlogger •",
    "private": "You need login and password to access this page.",
    "authfail": "Wrong username or password",
    "user": "User",
    "track": "Track",
    "latest": "latest position",
    "autoreload": "autoreload",
    "reload": "Reload now",
    "export": "Download data",
    "chart": "Altitudes chart",
    "close": "close",
    "time": "Time",
    "speed": "Speed",
    "accuracy": "Accuracy",
    "position": "Position",
    "altitude": "Altitude",
    "bearing": "Bearing",
    "ttime": "Total time",
    "aspeed": "Average speed",
    "tdistance": "Total distance",
    "pointof": "Point %d of %d",
    "summary": "Trip summary",
    "suser": "select user",
    "logout": "Log out",
    "login": "Log in",
    "username": "Username",
    "password": "Password",
    "language": "Language",
    "newinterval": "Enter new interval value (seconds)",
    "api": "Map API",
    "units": "Units",
    "metric": "Metric",
    "imperial": "Imperial/US",
    "nautical": "Nautical",
    "admin": "Administrator",
    "adminmenu": "Administration",
    "passwordrepeat": "Repeat password",
    "passwordenter": "Enter password",
    "usernameenter": "Enter username",
    "adduser": "Add user",
    "userexists": "User exists",
    "cancel": "Cancel",
    "submit": "Submit",
    "oldpassword": "Old password",
    "newpassword": "New password",
    "newpasswordrepeat": "Repeat new password",
    "changepass": "Change password",
    "gps": "GPS",
    "network": "Network",
    "deluser": "Remove user",
    "edituser": "Edit user",
    "servererror": "Server error",
    "allrequired": "All fields are required",
    "passnotmatch": "Passwords don't match",
    "oldpassinvalid": "Wrong old password",
    "passempty": "Empty password",
    "loginempty": "Empty login",
    "passstrengthwarn": "Invalid password strength",
    "actionsuccess": "Action completed successfully",
    "actionfailure": "Something went wrong",
    "notauthorized": "User not authorized",
    "userunknown": "User unknown",
    "userdelwarn": "Warning!\n\nYou are going to permanently delete user %s, together with all their routes and positions.\n\nAre you sure?",
    "editinguser": "You are editing user %s",
    "selfeditwarn": "Your can't edit your own user with this tool",
    "apifailure": "Sorry, can't load %s API",
    "trackdelwarn": "Warning!\n\nYou are going to permanently delete track %s and all its positions.\n\nAre you sure?",
    "editingtrack": "You are editing track %s",
    "deltrack": "Remove track",
    "trackname": "Track name",
    "edittrack": "Edit track",
    "positiondelwarn": "Warning!\n\nYou are going to permanently delete position %d of track %s.\n\nAre you sure?",
    "editingposition": "You are editing position #%d of track %s",
    "delposition": "Remove position",
    "delimage": "Remove image",
    "comment": "Comment",
    "image": "Image",
    "editposition": "Edit position",
    "passlenmin": "Password must be at least %d characters",
    "passrules_1": "It should contain at least one lower case letter, one upper case letter",
    "passrules_2": "It should contain at least one lower case letter, one upper case letter and one digit",
    "passrules_3": "It should contain at least one lower case letter, one upper case letter, one digit and one non-alphanumeric character",
    "owntrackswarn": "Your can only edit your own tracks",
    "gmauthfailure": "There may be problem with Google Maps API key on this page",
    "gmapilink": "You may find more information about API keys on <a target=\"_blank\" href=\"https://developers.google.com/maps/documentation/javascript/get-api-key\">this Google webpage</a>",
    "import": "Import track",
    "iuploadfailure": "Uploading failed",
    "iparsefailure": "Parsing failed",
    "idatafailure": "No track data in imported file",
    "isizefailure": "The uploaded file size should not exceed %d bytes",
    "imultiple": "Notice, multiple tracks imported (%d)",
    "allusers": "All users",
    "unitday": "d",
    "unitkmh": "km/h",
    "unitm": "m",
    "unitamsl": "a.s.l.",
    "unitkm": "km",
    "unitmph": "mph",
    "unitft": "ft",
    "unitmi": "mi",
    "unitkt": "kt",
    "unitnm": "nm",
    "config": "Settings",
    "editingconfig": "Default application settings",
    "latitude": "Initial latitude",
    "longitude": "Initial longitude",
    "interval": "Interval (s)",
    "googlekey": "Google Maps API key",
    "passlength": "Minimum password length",
    "passstrength": "Minimum password strength",
    "requireauth": "Require authorization",
    "publictracks": "Public tracks",
    "strokeweight": "Stroke weight",
    "strokeopacity": "Stroke opacity",
    "strokecolor": "Stroke color",
    "colornormal": "Marker color",
    "colorstart": "Start marker color",
    "colorstop": "Stop marker color",
    "colorextra": "Extra marker color",
    "colorhilite": "Highlight marker color",
    "uploadmaxsize": "Maximum upload size (MB)",
    "ollayers": "OpenLayers layer",
    "layername": "Layer name",
    "layerurl": "Layer URL",
    "add": "Add",
    "edit": "Edit",
    "delete": "Delete",
    "settings": "Settings",
    "trackcolor": "Track color",
}
