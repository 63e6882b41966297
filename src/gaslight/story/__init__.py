""" Authored content. Each story module exposes register(content). """
