"""Starter files written by ``raven init``."""

DEFAULT_HTML_TEMPLATE_SRC = (
    '<!DOCTYPE html><html lang="en"><meta charset="UTF-8">'
    '<meta content="IE=edge" http-equiv="X-UA-Compatible">'
    '<meta content="width=device-width,initial-scale=1" name="viewport">'
    '<meta content="[/raven_title/]" property="og:title">'
    '<meta content="[/raven_description/]" property="og:description">'
    '<meta content="[/raven_site_name/]" property="og:site_name">'
    '<meta content="[/raven_authors/]" name="author">'
    '[/raven_favicon/]<title>[/raven_title/]</title>[/raven_stylesheet/] [/raven_body/]'
)

DEFAULT_CSS_STYLESHEET_SRC = (
    ':root{background-color:#282828;color:#e7d7ad}'
    'pre{border-width:0;padding:2px;border-radius:5px;scrollbar-width:5px}'
    'pre code{border-width:0;border-radius:5px;font-size:1em;padding:2px}'
)

DEFAULT_MD_STARTER_SRC = """# Hello, World! :wave: :world_map:

```C
#include <stdio.h>

int main()
{
    printf("Hello, World!");
    return 0;
}
```

| Name  | Greeting      |
| ----- | ------------- |
| World | Hello, World! |
| James | Hello, James! |

- [x] Write a page
- [ ] Publish it

```pageinfo
title: Hello, World
description: Greet the world
```
"""
