#!/usr/bin/env python3
"""
Flask preview server for generated redirect pages
"""

import html
import os
import sys
from pathlib import Path

from flask import Flask, abort, request

from .govanity import INDEX_NAME


def list_pages(output_dir):
    """Repository identifiers that have an index.html under output_dir"""
    root = Path(output_dir)
    if not root.is_dir():
        return []
    return sorted(
        p.parent.relative_to(root).as_posix()
        for p in root.rglob(INDEX_NAME)
        if p.parent != root
    )


def create_app(output_dir):
    app = Flask(__name__)
    app.config['OUTPUT_DIR'] = Path(output_dir).resolve()

    @app.route('/')
    def index():
        """Show the generated repositories"""
        items = ''.join(
            f'<li><a href="/{html.escape(repo)}">{html.escape(repo)}</a></li>'
            for repo in list_pages(app.config['OUTPUT_DIR'])
        )
        if not items:
            items = '<li>No redirect pages generated yet.</li>'
        return f'''<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>govanity preview</title></head>
<body>
<h1>govanity preview</h1>
<p>Serving {html.escape(str(app.config['OUTPUT_DIR']))}</p>
<ul>{items}</ul>
</body>
</html>
'''

    @app.route('/<path:repo_path>')
    def serve_page(repo_path):
        """Serve <outdir>/<repo_path>/index.html; ?go-get=1 gets the same page"""
        root = app.config['OUTPUT_DIR']
        page = (root / repo_path.strip('/') / INDEX_NAME).resolve()
        if root not in page.parents or not page.is_file():
            abort(404)
        app.logger.debug('go-get=%s %s', request.args.get('go-get'), page)
        return page.read_text(encoding='utf-8'), 200, {'Content-Type': 'text/html; charset=utf-8'}

    return app


def main():
    if len(sys.argv) != 2:
        print('usage: govanity-serve OUTDIR', file=sys.stderr)
        return 1
    port = int(os.environ.get('PORT', 5000))
    create_app(sys.argv[1]).run(host='127.0.0.1', port=port)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
