# orderdesk/core/document_store.py
import json
import requests
from typing import Optional, Dict, Any, List


class DocumentStoreError(Exception):
    """Raised when the document store rejects a call or cannot be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class Patch:
    """Pending patch for a single document, committed with commit()"""

    def __init__(self, client: 'SanityClient', document_id: str):
        self.client = client
        self.document_id = document_id
        self.operations: Dict[str, Any] = {}

    def set(self, fields: Dict[str, Any]) -> 'Patch':
        self.operations.setdefault('set', {}).update(fields)
        return self

    def commit(self) -> Dict[str, Any]:
        mutation = {'patch': dict(self.operations, id=self.document_id)}
        documents = self.client.mutate([mutation], return_documents=True)
        if not documents:
            raise DocumentStoreError(f"Patch of {self.document_id} returned no document")
        return documents[0]


class SanityClient:
    """Client for the Sanity HTTP query and mutation API"""

    def __init__(self, project_id: str = None, dataset: str = 'production',
                 api_version: str = '2023-05-03', token: str = None,
                 use_cdn: bool = False, timeout: float = 30):
        self.project_id = project_id
        self.dataset = dataset
        self.api_version = api_version.lstrip('v')
        self.token = token
        self.use_cdn = use_cdn
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.project_id and self.dataset)

    def _base_url(self, cdn: bool = False) -> str:
        host = 'apicdn.sanity.io' if cdn else 'api.sanity.io'
        return f"https://{self.project_id}.{host}/v{self.api_version}/data"

    def _headers(self) -> Dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        if self.token:
            headers['Authorization'] = f"Bearer {self.token}"
        return headers

    def _check_configured(self):
        if not self.configured:
            raise DocumentStoreError("Sanity project ID and dataset are not configured")

    def _parse_response(self, response) -> Dict[str, Any]:
        if response.status_code not in (200, 201):
            message = None
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                error = body.get('error')
                if isinstance(error, dict):
                    message = error.get('description') or error.get('message')
                elif error:
                    message = str(error)
            raise DocumentStoreError(
                f"Sanity API returned {response.status_code}: {message or response.text}",
                status_code=response.status_code
            )
        try:
            return response.json()
        except ValueError as e:
            raise DocumentStoreError(f"Sanity API returned invalid JSON: {e}",
                                     status_code=response.status_code)

    def fetch(self, query: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Run a GROQ query and return its result

        Args:
            query: GROQ query string
            params: Query parameters, referenced as $name in the query
        """
        self._check_configured()

        query_params = {'query': query}
        for name, value in (params or {}).items():
            query_params[f"${name}"] = json.dumps(value)

        url = f"{self._base_url(cdn=self.use_cdn)}/query/{self.dataset}"

        try:
            response = requests.get(url, params=query_params, headers=self._headers(),
                                    timeout=self.timeout)
        except requests.RequestException as e:
            raise DocumentStoreError(f"Failed to reach Sanity: {e}")

        return self._parse_response(response).get('result')

    def mutate(self, mutations: List[Dict[str, Any]],
               return_documents: bool = True) -> List[Dict[str, Any]]:
        """
        Send a transaction of mutations

        Returns the affected documents when return_documents is set,
        otherwise the raw result entries ({id, operation}).
        """
        self._check_configured()

        url = f"{self._base_url()}/mutate/{self.dataset}"
        query_params = {'returnDocuments': 'true' if return_documents else 'false'}

        try:
            response = requests.post(url, params=query_params, headers=self._headers(),
                                     data=json.dumps({'mutations': mutations}),
                                     timeout=self.timeout)
        except requests.RequestException as e:
            raise DocumentStoreError(f"Failed to reach Sanity: {e}")

        results = self._parse_response(response).get('results', [])
        if return_documents:
            return [result.get('document') or {'_id': result.get('id')} for result in results]
        return results

    def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Create a document; the store assigns _id unless one is given"""
        if '_type' not in document:
            raise DocumentStoreError("Documents must have a _type")
        documents = self.mutate([{'create': document}])
        if not documents:
            raise DocumentStoreError("Create returned no document")
        return documents[0]

    def patch(self, document_id: str) -> Patch:
        return Patch(self, document_id)

    def delete(self, document_id: str) -> Dict[str, Any]:
        results = self.mutate([{'delete': {'id': document_id}}], return_documents=False)
        return results[0] if results else {'id': document_id, 'operation': 'delete'}

    def ping(self) -> bool:
        """Cheap reachability check used by the health endpoint"""
        self.fetch('count(*[_type == $type][0...1])', {'type': 'order'})
        return True
