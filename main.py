from rich.pretty import pprint

from commandeer import *

app = Application("chat", "An example chat application.", colorful=True)
debug = app.flag("debug", "Enable debug mode.", type=bool)
server = app.flag("server", "Server address.", default="127.0.0.1")

register = app.command("register", "Register a new user.")
nick = register.arg("nick", "Nickname for user.", required=True)
name = register.arg("name", "Name of user.")

post = app.command("post", "Post a message to a channel.")
channel = post.flag("channel", "Channel to post to.", short="a", required=True)
text = post.arg("text", "Text to post.", variadic=True)


if __name__ == '__main__':
    app.version("0.0.0")
    match app.run():
        case "register":
            pprint({"nick": nick.value, "name": name.value, "server": server.value})
        case "post":
            pprint({"channel": channel.value, "text": " ".join(text.value), "debug": debug.value})
