from typing import Annotated, Any, Callable, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator

from keystone_di.domain.enums import Lifetime, RecipeKind


class InstanceRecipe(BaseModel):
    """Recipe holding an already constructed value.

    Attributes:
        value: The object returned verbatim on every resolution.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal[RecipeKind.INSTANCE] = RecipeKind.INSTANCE
    value: Any = Field(..., description="The pre-built object.")


class FactoryRecipe(BaseModel):
    """Recipe holding a factory callable.

    Attributes:
        factory: Callable producing the object.
        pass_container: Whether the factory receives the container as its argument.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal[RecipeKind.FACTORY] = RecipeKind.FACTORY
    factory: Callable[..., Any] = Field(..., description="The factory producing the object.")
    pass_container: bool = Field(default=True, description="Whether the container is passed to the factory.")


class TypeNameRecipe(BaseModel):
    """Recipe naming a type to construct through constructor injection.

    Attributes:
        type_name: Name of the type known to the type registry.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal[RecipeKind.TYPE_NAME] = RecipeKind.TYPE_NAME
    type_name: str = Field(..., description="Name of the constructible type.")


Recipe = Annotated[
    Union[InstanceRecipe, FactoryRecipe, TypeNameRecipe],
    Field(discriminator="kind"),
]


class Binding(BaseModel):
    """Value object associating an identifier with a recipe.

    Attributes:
        identifier: The key the binding is registered under.
        recipe: How the object is produced.
        single: Whether the first resolution is cached and reused.
        eager: Whether the binding was resolved at registration time.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    identifier: str = Field(..., description="The identifier of the binding.")
    recipe: Recipe = Field(..., description="The recipe producing the object.")
    single: bool = Field(default=False, description="Whether the binding is a singleton.")
    eager: bool = Field(default=False, description="Whether the binding is eagerly resolved.")

    @property
    def lifetime(self) -> Lifetime:
        return Lifetime.SINGLETON if self.single else Lifetime.TRANSIENT


class ParameterDescriptor(BaseModel):
    """Describes one constructor parameter.

    Attributes:
        name: Parameter name.
        position: Zero-based position in the constructor signature.
        keyword_only: Whether the argument must be passed by keyword.
        declared_type: Name of the declared injectable type, if any.
        has_default: Whether the parameter has a default value.
        default: The default value, meaningful only when ``has_default`` is set.
        type_error: Introspection error raised while reading the declared type.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    position: int
    keyword_only: bool = False
    declared_type: Optional[str] = None
    has_default: bool = False
    default: Any = None
    type_error: Optional[str] = None


class TypeDescriptor(BaseModel):
    """Describes how to construct a type.

    Attributes:
        name: The type name the descriptor is registered under.
        factory: Callable invoked with the resolved arguments.
        parameters: Constructor parameters in declaration order.
        constructible: False for abstract or builtin types.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    factory: Callable[..., Any]
    parameters: List[ParameterDescriptor] = Field(default_factory=list)
    constructible: bool = True


class BindingConfig(BaseModel):
    """Declarative binding description, as found in a configuration batch.

    Attributes:
        identifier: The identifier to bind, or a class standing for its type name.
        recipe: Instance, factory, class or type name.
        single: Register as singleton.
        new: Register as singleton and resolve once the whole batch is loaded.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    identifier: Union[StrictStr, Type[Any]]
    recipe: Any
    single: StrictBool = False
    new: StrictBool = False

    @field_validator("recipe")
    @classmethod
    def _recipe_not_none(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("recipe must not be None")
        return value
