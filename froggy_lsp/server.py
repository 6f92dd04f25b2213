"""
Froggy Language Server Protocol Implementation

Hover a PLOP, hop to a lilypad, find every frog that leaps there.
Speaks JSON-RPC over stdio with full-document sync; every edit reparses
the whole file, which for a language with no nesting is hardly a hardship.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

import json
import logging
import sys
from typing import Any, BinaryIO, Dict, List, Optional, Set

from .config import ServerConfig, apply_log_level
from .diagnostics import collect_diagnostics
from .document import Document, DocumentStore
from .errors import ParseFailure
from .language import FROGGY_INSTRUCTIONS, legend
from .positions import Position
from .resolver import definition, hover, references, symbols
from .tokens import semantic_tokens

logger = logging.getLogger(__name__)

SERVER_NAME = 'Froggy Language Server'
SERVER_VERSION = '0.1.0'

# JSON-RPC error codes
INTERNAL_ERROR = -32603

# LSP completion item kinds
COMPLETION_KIND_FUNCTION = 3
COMPLETION_KIND_KEYWORD = 14


class FroggyLanguageServer:
    """
    Froggy Language Server

    One DocumentStore holds every open file. Notifications replace
    snapshots; requests read one snapshot and answer from it.
    """

    def __init__(self, reader: Optional[BinaryIO] = None, writer: Optional[BinaryIO] = None,
                 config: Optional[ServerConfig] = None):
        self.reader = reader if reader is not None else sys.stdin.buffer
        self.writer = writer if writer is not None else sys.stdout.buffer
        self.config = config or ServerConfig()
        self.documents = DocumentStore(self.config.label_policy)
        # URIs whose didOpen text failed to parse; the next good change opens them
        self.failed_opens: Set[str] = set()
        self.running = True
        self.shutdown_requested = False

    def send_message(self, message: dict):
        """Send a JSON-RPC message to the client."""
        content = json.dumps(message).encode('utf-8')
        header = f'Content-Length: {len(content)}\r\n\r\n'.encode('ascii')
        self.writer.write(header + content)
        self.writer.flush()

    def send_response(self, request_id: Any, result: Any):
        """Send a response to a request."""
        self.send_message({
            'jsonrpc': '2.0',
            'id': request_id,
            'result': result
        })

    def send_error(self, request_id: Any, code: int, message: str):
        """Send an error response."""
        self.send_message({
            'jsonrpc': '2.0',
            'id': request_id,
            'error': {'code': code, 'message': message}
        })

    def send_notification(self, method: str, params: dict):
        self.send_message({
            'jsonrpc': '2.0',
            'method': method,
            'params': params
        })

    def read_message(self) -> Optional[dict]:
        """Read a JSON-RPC message from the input stream. None at end of input."""
        headers = {}
        while True:
            line = self.reader.readline()
            if not line:
                return None
            line = line.decode('ascii', errors='replace').strip()
            if not line:
                break
            if ':' in line:
                key, value = line.split(':', 1)
                headers[key.strip().lower()] = value.strip()

        try:
            content_length = int(headers.get('content-length', 0))
        except ValueError:
            logger.error('Bad Content-Length header: %r', headers.get('content-length'))
            return None
        if content_length <= 0:
            return None
        body = self.reader.read(content_length)
        try:
            return json.loads(body.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.exception('Dropping unreadable message body')
            return {}

    def publish_diagnostics(self, uri: str, doc: Optional[Document]):
        """Push the current diagnostics for uri (an empty list once it's closed)."""
        params: Dict[str, Any] = {'uri': uri, 'diagnostics': []}
        if doc is not None:
            found = collect_diagnostics(doc.tree, doc.positions)
            params['diagnostics'] = [d.to_lsp() for d in found]
            params['version'] = doc.version
            logger.info('%s v%d: %d diagnostics', uri, doc.version, len(found))
        self.send_notification('textDocument/publishDiagnostics', params)

    def handle_initialize(self, params: dict) -> dict:
        """Handle initialize request."""
        self.config = self.config.with_init_options(params.get('initializationOptions'))
        if self.config.log_level:
            apply_log_level(self.config.log_level)
        self.documents.policy = self.config.label_policy

        return {
            'capabilities': {
                'textDocumentSync': {
                    'openClose': True,
                    'change': 1,  # Full sync
                },
                'completionProvider': {
                    'resolveProvider': False
                },
                'hoverProvider': True,
                'definitionProvider': True,
                'referencesProvider': True,
                'documentSymbolProvider': True,
                'semanticTokensProvider': {
                    'legend': legend(),
                    'full': True,
                    'range': False,
                },
            },
            'serverInfo': {
                'name': SERVER_NAME,
                'version': SERVER_VERSION
            }
        }

    def handle_did_open(self, params: dict):
        """Handle textDocument/didOpen."""
        item = params['textDocument']
        uri = item['uri']
        doc = self._open(uri, item['text'], item.get('version', 0))
        if doc is not None:
            self.publish_diagnostics(uri, doc)

    def _open(self, uri: str, text: str, version: int) -> Optional[Document]:
        try:
            doc = self.documents.open(uri, text, version)
        except ParseFailure as exc:
            logger.warning('Could not open %s: %s', uri, exc)
            self.failed_opens.add(uri)
            return None
        self.failed_opens.discard(uri)
        return doc

    def handle_did_change(self, params: dict):
        """Handle textDocument/didChange."""
        uri = params['textDocument']['uri']
        version = params['textDocument'].get('version', 0)
        doc = None
        # Full sync mode - each change carries the whole text, the last one wins
        for change in params.get('contentChanges', []):
            text = change.get('text', '')
            if uri in self.failed_opens:
                doc = self._open(uri, text, version)
            else:
                doc = self.documents.apply_change(uri, text, version)
                if doc is None:
                    return
        if doc is not None:
            self.publish_diagnostics(uri, doc)

    def handle_did_close(self, params: dict):
        """Handle textDocument/didClose."""
        uri = params['textDocument']['uri']
        self.failed_opens.discard(uri)
        if self.documents.close(uri):
            self.publish_diagnostics(uri, None)

    def handle_hover(self, params: dict) -> Optional[dict]:
        """Provide hover information."""
        uri = params['textDocument']['uri']
        with self.documents.read(uri) as doc:
            if not doc:
                return None
            result = hover(doc, Position.from_lsp(params['position']))
        return result.to_lsp() if result else None

    def handle_definition(self, params: dict) -> Optional[dict]:
        """Go to the LILY a HOP or LEAP lands on."""
        uri = params['textDocument']['uri']
        with self.documents.read(uri) as doc:
            if not doc:
                return None
            target = definition(doc, Position.from_lsp(params['position']))
        if target is None:
            return None
        return {'uri': uri, 'range': target.to_lsp()}

    def handle_references(self, params: dict) -> Optional[List[dict]]:
        """Find all references to a label."""
        uri = params['textDocument']['uri']
        include_declaration = bool(params.get('context', {}).get('includeDeclaration', False))
        with self.documents.read(uri) as doc:
            if not doc:
                return None
            found = references(doc, Position.from_lsp(params['position']), include_declaration)
        if not found:
            return None
        return [{'uri': uri, 'range': r.to_lsp()} for r in found]

    def handle_document_symbol(self, params: dict) -> Optional[List[dict]]:
        """Provide document symbols - one per lilypad."""
        uri = params['textDocument']['uri']
        with self.documents.read(uri) as doc:
            if not doc:
                return None
            return [symbol.to_lsp() for symbol in symbols(doc)]

    def handle_semantic_tokens(self, params: dict) -> Optional[dict]:
        """Handle textDocument/semanticTokens/full."""
        uri = params['textDocument']['uri']
        with self.documents.read(uri) as doc:
            if not doc:
                return None
            return {'data': semantic_tokens(doc)}

    def handle_completion(self, params: dict) -> List[dict]:
        """Offer every instruction, plus the labels defined in this file."""
        completions = []
        for keyword, (_, _, description) in FROGGY_INSTRUCTIONS.items():
            completions.append({
                'label': keyword,
                'kind': COMPLETION_KIND_KEYWORD,
                'detail': description,
            })

        uri = params['textDocument']['uri']
        with self.documents.read(uri) as doc:
            if doc:
                for symbol in symbols(doc):
                    completions.append({
                        'label': symbol.name,
                        'kind': COMPLETION_KIND_FUNCTION,
                        'detail': f'Lilypad at line {symbol.range.start.line + 1}',
                    })
        return completions

    def dispatch(self, message: dict):
        """Route one incoming message to its handler."""
        method = message.get('method', '')
        params = message.get('params') or {}
        request_id = message.get('id')

        try:
            if method == 'initialize':
                result = self.handle_initialize(params)
                self.send_response(request_id, result)

            elif method == 'initialized':
                logger.info('Client initialized')

            elif method == 'shutdown':
                self.shutdown_requested = True
                self.send_response(request_id, None)

            elif method == 'exit':
                self.running = False

            elif method == 'textDocument/didOpen':
                self.handle_did_open(params)

            elif method == 'textDocument/didChange':
                self.handle_did_change(params)

            elif method == 'textDocument/didClose':
                self.handle_did_close(params)

            elif method == 'textDocument/completion':
                result = self.handle_completion(params)
                self.send_response(request_id, result)

            elif method == 'textDocument/hover':
                result = self.handle_hover(params)
                self.send_response(request_id, result)

            elif method == 'textDocument/definition':
                result = self.handle_definition(params)
                self.send_response(request_id, result)

            elif method == 'textDocument/references':
                result = self.handle_references(params)
                self.send_response(request_id, result)

            elif method == 'textDocument/documentSymbol':
                result = self.handle_document_symbol(params)
                self.send_response(request_id, result)

            elif method == 'textDocument/semanticTokens/full':
                result = self.handle_semantic_tokens(params)
                self.send_response(request_id, result)

            elif request_id is not None:
                # Unknown method with ID - send empty response
                self.send_response(request_id, None)

        except Exception as e:
            logger.exception('Handler for %s failed', method)
            if request_id is not None:
                self.send_error(request_id, INTERNAL_ERROR, str(e))

    def run(self) -> int:
        """Main server loop. Returns the process exit code."""
        while self.running:
            message = self.read_message()
            if message is None:
                break
            self.dispatch(message)
        return 0 if self.shutdown_requested else 1
