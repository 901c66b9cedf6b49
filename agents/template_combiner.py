"""Merge named template fragments into service artifacts plus an integration bridge.

No reasoning service is involved: output depends only on the fragment names
and the request, so the same strategy always yields the same artifacts.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from contracts import ArtifactLanguage, CompositionRequest, GeneratedArtifact, GenerationMethod
from librarian import Librarian, get_librarian
from .naming import comment_safe, pascal_case, slugify

logger = logging.getLogger(__name__)

SDK = "@hashgraph/sdk"

# (trigger words in the fragment name, fragment kind); first match wins
FRAGMENT_KINDS: List[Tuple[Tuple[str, ...], str]] = [
    (("wallet", "hashconnect"), "wallet"),
    (("contract", "solidity", "evm"), "contract"),
    (("token", "hts", "nft", "fractional", "carbon", "royalt", "payment"), "token"),
    (("file", "document", "record", "credential"), "file"),
]
DEFAULT_KIND = "consensus"

KIND_DEPENDENCIES: Dict[str, List[str]] = {
    "wallet": ["hashconnect"],
    "contract": [SDK, "ethers"],
    "token": [SDK],
    "file": [SDK],
    "consensus": [SDK],
}

KIND_SDK_IMPORTS: Dict[str, List[str]] = {
    "contract": ["ContractExecuteTransaction", "ContractId"],
    "token": ["TokenCreateTransaction", "TransferTransaction", "TokenId"],
    "file": ["FileCreateTransaction", "FileContentsQuery", "FileId"],
    "consensus": ["TopicMessageSubmitTransaction", "TopicId"],
}

KIND_METHODS: Dict[str, str] = {
    "token": '''
  async createToken(name: string, symbol: string, initialSupply: number): Promise<TokenId> {
    try {
      const transaction = new TokenCreateTransaction()
        .setTokenName(name)
        .setTokenSymbol(symbol)
        .setInitialSupply(initialSupply)
        .setTreasuryAccountId(AccountId.fromString(this.config.operatorId));
      const receipt = await (await transaction.execute(this.client)).getReceipt(this.client);
      this.logger.info("Token created", { tokenId: receipt.tokenId?.toString() });
      return receipt.tokenId as TokenId;
    } catch (error) {
      this.logger.error("Token creation failed", error);
      throw error;
    }
  }

  async transfer(tokenId: string, to: string, amount: number): Promise<string> {
    try {
      const operator = AccountId.fromString(this.config.operatorId);
      const response = await new TransferTransaction()
        .addTokenTransfer(TokenId.fromString(tokenId), operator, -amount)
        .addTokenTransfer(TokenId.fromString(tokenId), AccountId.fromString(to), amount)
        .execute(this.client);
      const receipt = await response.getReceipt(this.client);
      return receipt.status.toString();
    } catch (error) {
      this.logger.error("Token transfer failed", error);
      throw error;
    }
  }
''',
    "consensus": '''
  async recordEvent(topicId: string, event: Record<string, unknown>): Promise<string> {
    try {
      const response = await new TopicMessageSubmitTransaction()
        .setTopicId(TopicId.fromString(topicId))
        .setMessage(JSON.stringify(event))
        .execute(this.client);
      const receipt = await response.getReceipt(this.client);
      this.logger.info("Event recorded", { topicId, sequence: receipt.topicSequenceNumber?.toString() });
      return receipt.status.toString();
    } catch (error) {
      this.logger.error("Event recording failed", error);
      throw error;
    }
  }
''',
    "file": '''
  async storeDocument(contents: string): Promise<FileId> {
    try {
      const response = await new FileCreateTransaction()
        .setContents(contents)
        .execute(this.client);
      const receipt = await response.getReceipt(this.client);
      return receipt.fileId as FileId;
    } catch (error) {
      this.logger.error("Document storage failed", error);
      throw error;
    }
  }

  async readDocument(fileId: string): Promise<string> {
    try {
      const contents = await new FileContentsQuery()
        .setFileId(FileId.fromString(fileId))
        .execute(this.client);
      return Buffer.from(contents).toString("utf8");
    } catch (error) {
      this.logger.error("Document read failed", error);
      throw error;
    }
  }
''',
    "contract": '''
  async callContract(contractId: string, abi: string[], fn: string, args: unknown[], gas = 100000): Promise<string> {
    try {
      const encoded = new Interface(abi).encodeFunctionData(fn, args);
      const response = await new ContractExecuteTransaction()
        .setContractId(ContractId.fromString(contractId))
        .setGas(gas)
        .setFunctionParameters(Buffer.from(encoded.slice(2), "hex"))
        .execute(this.client);
      const receipt = await response.getReceipt(this.client);
      return receipt.status.toString();
    } catch (error) {
      this.logger.error("Contract call failed", error);
      throw error;
    }
  }
''',
}

WALLET_TEMPLATE = '''/**
 * @file {path}
 * @description {purpose}
 */
import {{ HashConnect }} from "hashconnect";

export interface Logger {{
  info(message: string, meta?: unknown): void;
  error(message: string, meta?: unknown): void;
}}

export interface {name}Config {{
  projectId: string;
  network: "testnet" | "mainnet";
  appName: string;
}}

/** Wallet pairing for {fragment}. */
export class {name} {{
  private connector?: HashConnect;

  constructor(private readonly config: {name}Config, private readonly logger: Logger) {{}}

  async connect(): Promise<void> {{
    try {{
      this.connector = new HashConnect(
        this.config.network as never,
        this.config.projectId,
        {{ name: this.config.appName, description: this.config.appName, icons: [], url: "" }},
      );
      await this.connector.init();
      this.logger.info("Wallet connector initialised");
    }} catch (error) {{
      this.logger.error("Wallet connection failed", error);
      throw error;
    }}
  }}
}}
'''

SERVICE_TEMPLATE = '''/**
 * @file {path}
 * @description {purpose}
 */
import {{ Client, AccountId, PrivateKey, {sdk_imports} }} from "@hashgraph/sdk";
{extra_imports}
export interface Logger {{
  info(message: string, meta?: unknown): void;
  error(message: string, meta?: unknown): void;
}}

export interface {name}Config {{
  operatorId: string;
  operatorKey: string;
  network: "testnet" | "mainnet";
}}

/** {fragment} operations for: {requirement} */
export class {name} {{
  private readonly client: Client;

  constructor(private readonly config: {name}Config, private readonly logger: Logger) {{
    this.client = config.network === "mainnet" ? Client.forMainnet() : Client.forTestnet();
    this.client.setOperator(AccountId.fromString(config.operatorId), PrivateKey.fromString(config.operatorKey));
  }}
{methods}}}
'''

BRIDGE_TEMPLATE = '''/**
 * @file {path}
 * @description Integration bridge coordinating {fragments}
 */
{imports}

export type BridgeState = Record<string, unknown>;

/** Coordinates cross-component state for: {requirement} */
export class {name} {{
  private state: BridgeState = {{}};

  constructor(
{constructor_args}
  ) {{}}

  async coordinateOperation(operation: string, payload: unknown): Promise<BridgeState> {{
    try {{
      this.state = {{ ...this.state, [operation]: payload }};
      return this.synchronizeState();
    }} catch (error) {{
      throw new Error(`Bridge operation ${{operation}} failed: ${{String(error)}}`);
    }}
  }}

  async synchronizeState(): Promise<BridgeState> {{
    return {{ ...this.state }};
  }}
}}
'''


def split_fragments(combinations: Iterable[str]) -> List[str]:
    """Flatten 'a + b' combination entries into unique fragment names, in order."""
    fragments: List[str] = []
    for combination in combinations:
        for part in combination.replace(",", "+").split("+"):
            name = part.strip()
            if name and name not in fragments:
                fragments.append(name)
    return fragments


def fragment_kind(fragment: str) -> str:
    name = fragment.lower()
    for triggers, kind in FRAGMENT_KINDS:
        if any(trigger in name for trigger in triggers):
            return kind
    return DEFAULT_KIND


class TemplateCombiner:
    """Builds one service artifact per fragment and a bridge when several are combined."""

    FRAGMENT_CONFIDENCE = 85
    BRIDGE_CONFIDENCE = 80

    def __init__(self, librarian: Optional[Librarian] = None):
        self.librarian = librarian or get_librarian()

    def combine(self, combinations: Iterable[str], request: CompositionRequest) -> List[GeneratedArtifact]:
        fragments = split_fragments(combinations)
        if not fragments:
            return []

        artifacts = [self._fragment_artifact(fragment, request) for fragment in fragments]
        if len(fragments) > 1:
            artifacts.append(self._bridge_artifact(fragments, request))
        logger.info("Combined %d template fragment(s) into %d artifact(s)", len(fragments), len(artifacts))
        return artifacts

    def _describe(self, fragment: str) -> str:
        for templates in self.librarian.knowledge.template_inventory.values():
            if fragment in templates:
                return f"{fragment} template: {templates[fragment]}"
        return f"{fragment} template"

    def _fragment_artifact(self, fragment: str, request: CompositionRequest) -> GeneratedArtifact:
        kind = fragment_kind(fragment)
        name = pascal_case(fragment) + "Service"
        path = f"src/templates/{slugify(fragment)}-service.ts"
        purpose = self._describe(fragment)

        if kind == "wallet":
            content = WALLET_TEMPLATE.format(path=path, purpose=purpose, name=name, fragment=comment_safe(fragment))
        else:
            content = SERVICE_TEMPLATE.format(
                path=path,
                purpose=purpose,
                name=name,
                fragment=comment_safe(fragment),
                requirement=comment_safe(request.requirement.description),
                sdk_imports=", ".join(KIND_SDK_IMPORTS[kind]),
                extra_imports='import { Interface } from "ethers";\n' if kind == "contract" else "",
                methods=KIND_METHODS[kind],
            )

        return GeneratedArtifact(
            file_path=path,
            content=content,
            language=ArtifactLanguage.TYPESCRIPT,
            purpose=purpose,
            dependencies=list(KIND_DEPENDENCIES[kind]),
            generation_method=GenerationMethod.HYBRID,
            confidence=self.FRAGMENT_CONFIDENCE,
        )

    def _bridge_artifact(self, fragments: List[str], request: CompositionRequest) -> GeneratedArtifact:
        joined = "-".join(slugify(f) for f in fragments)
        path = f"src/bridges/{slugify(joined, max_words=8)}-bridge.ts"
        name = pascal_case(" ".join(fragments)) + "Bridge"

        imports = "\n".join(
            f'import {{ {pascal_case(f)}Service }} from "../templates/{slugify(f)}-service";' for f in fragments
        )
        constructor_args = ",\n".join(
            f"    private readonly {self._field_name(f)}: {pascal_case(f)}Service" for f in fragments
        )
        content = BRIDGE_TEMPLATE.format(
            path=path,
            fragments=", ".join(comment_safe(f) for f in fragments),
            requirement=comment_safe(request.requirement.description),
            imports=imports,
            constructor_args=constructor_args,
            name=name,
        )

        return GeneratedArtifact(
            file_path=path,
            content=content,
            language=ArtifactLanguage.TYPESCRIPT,
            purpose=f"Integration bridge between {', '.join(fragments)}",
            dependencies=[],
            generation_method=GenerationMethod.HYBRID,
            confidence=self.BRIDGE_CONFIDENCE,
        )

    @staticmethod
    def _field_name(fragment: str) -> str:
        name = pascal_case(fragment)
        return name[:1].lower() + name[1:] + "Service"
